"""Create the students table and its lookup indexes if they are missing."""
import sys

from student_registry.core.bootstrap import main

sys.exit(main())
