"""
Work-area file service: stage files in a private temporary directory, promote
them to the configured storage provider, then reclaim the directory.
"""
