"""User interfaces for Fretboard Master.

The UI modules import pygame and curses at load time, so they are imported
directly (fretboard_master.ui.pygame_ui, fretboard_master.ui.curses_ui)
rather than from here.
"""
