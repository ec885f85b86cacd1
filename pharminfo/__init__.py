"""
약정보 (pharminfo)
Price comparison and drug information site for over-the-counter medicines,
plus the offline tooling that builds and checks its content.
"""

__version__ = "0.1.0"
