import sys

from .interface import main

sys.exit(main())
