"""notionhtml command line interface."""
