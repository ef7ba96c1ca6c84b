import sys

from dexsolver.main import main

sys.exit(main())
