import sys

from pairdist.cli import main

sys.exit(main())
