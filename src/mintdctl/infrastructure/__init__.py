"""Infrastructure layer: filesystem writes and Jinja2 template loading."""
