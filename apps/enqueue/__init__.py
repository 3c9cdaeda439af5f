"""Script and style registration for Django projects.

Declare front-end assets once, let the request lifecycle enqueue them on the
admin or public pages that need them.
"""
