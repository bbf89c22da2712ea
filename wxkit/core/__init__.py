"""Configuration, logging and error primitives shared by every utility."""
