"""Command-line and shell integration for sshpick."""
