"""Qt plumbing between the gallery core and a presentation layer."""
