"""Runtime core: chat client wiring, dispatch and the framework aggregate."""
