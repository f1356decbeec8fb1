"""
AdMedia API server.
"""
