"""Loading and templating of the user configuration file."""
