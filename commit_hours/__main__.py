import sys

from commit_hours.commit_hours import main

sys.exit(main())
