"""HTTP and WebSocket service driving the simulation tick loop."""
