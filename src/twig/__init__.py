"""Interactive local branch pruning.

Features:
- List local branches, most recently committed first
- Skip the repository's default branch
- Ask about each branch: delete, force delete, skip or quit
- Offer a force delete when git refuses an unmerged branch
"""

__version__ = "0.1.0"
