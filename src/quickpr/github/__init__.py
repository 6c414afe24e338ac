"""git and GitHub CLI integration.

Commits, pushes and opens pull requests whose description carries a
change analysis:
  - Severity level with reasoning and metrics
  - Commits and modified files
  - Impact areas and risk notes
"""
