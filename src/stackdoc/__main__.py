import sys

from stackdoc.cli import main

sys.exit(main())
