"""
Chess Board Locator Scripts

Standalone scripts:
- locate_board: Locate the board in saved RGB-D frames or a live camera
"""
