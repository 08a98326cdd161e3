"""Built-in formatters. Every public module here is scanned by the formatter catalog."""
