"""
Pytest configuration: puts the project root on sys.path so that the
modules can be imported by the tests without installation.
"""

import sys
from pathlib import Path


project_root = Path(__file__).parent
if str(project_root) not in sys.path:
	sys.path.insert(0, str(project_root))
