import sys

from flexfee.app import main

sys.exit(main())
