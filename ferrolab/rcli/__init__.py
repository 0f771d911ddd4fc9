"""Command-line toolbox: CSV, passwords, Base64, text signing and encryption, a file server."""