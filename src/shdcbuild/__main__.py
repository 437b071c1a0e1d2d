import sys

from shdcbuild.cli import main

sys.exit(main())
