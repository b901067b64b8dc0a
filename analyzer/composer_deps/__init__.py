"""composer-deps analyzer package.

This package provides the dependency analysis engine for PHP projects managed
by Composer, including:
- Lexical extraction of used classes, functions and constants
- Package attribution through Composer's generated autoload maps
- Classification into shadow, unused and misplaced dependencies
- Console and JUnit reporting
"""

__version__ = "1.0.0"
