"""Personal record vault: records kept in a JSON file or a SQL database."""
