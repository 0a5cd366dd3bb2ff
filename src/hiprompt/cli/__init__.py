"""hiprompt command line client."""
