"""CLI package for the Sublite API client

Log in, inspect the stored session, and send authenticated requests from
the command line.
"""
