"""Service packages for RosterFlow."""
