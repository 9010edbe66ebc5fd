import sys

from pr_teammate.action import main

sys.exit(main())
