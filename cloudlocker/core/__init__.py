"""Qt-free state and service layer of the client."""
