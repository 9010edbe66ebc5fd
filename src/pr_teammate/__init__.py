"""AI PR Teammate: fixes pull requests from review comments and CI failures"""

__version__ = "1.0.0"
