"""PyQt5 front end over cloudlocker.core."""
