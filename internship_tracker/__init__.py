"""
Internship Tracker - watches internship listings and alerts on new ones.

This package provides functionality to:
- Fetch internship postings from configured sources
- Derive stable identifiers to recognise postings across runs
- Compare results with previously seen postings to detect new entries
- Alert on the console (and desktop, where available) for each new posting
- Persist everything seen in a versioned JSON state file
"""

__version__ = "1.0.0"
__author__ = "Internship Tracker Team"
