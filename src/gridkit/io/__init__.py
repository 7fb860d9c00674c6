"""Output sinks for laid-out sheets. ``gridkit.io.xlsx`` needs the ``xlsx`` extra."""
