import sys

from internship_tracker.main import main


sys.exit(main())
