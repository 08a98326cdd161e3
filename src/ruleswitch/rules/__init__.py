"""Built-in rules. Every public module here is scanned by the rule catalog."""
