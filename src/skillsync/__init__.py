"""skillsync: keep one directory of agent skills in sync with every tool.

See `skillsync --help` for the command line interface.
"""
