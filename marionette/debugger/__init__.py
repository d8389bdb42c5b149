"""The Marionette debugger application: menu bar, panels and the render loop."""
