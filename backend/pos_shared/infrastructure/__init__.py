"""
Infrastructure: database sessions and the collection store interface.
"""
