"""Real-time sync of a single shared 3x3 game board over WebSockets."""
