"""Built-in reporters. Every public module here is scanned by the reporter catalog."""
