"""Command-line front end for the SoleCraft session gateway."""
