"""The Wall: a note board with an infinite, pannable canvas."""
