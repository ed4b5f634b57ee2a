"Command-line subcommands."
