# staffdesk/utils/__init__.py
