import sys

from reloadserve.main import main

sys.exit(main())
