"""PyQt5 front end. Widgets talk to the backend only through the request router."""
