"""
Officer records and their life-cycle events.
"""
