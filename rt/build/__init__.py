"""Build tool invocation, descriptor edits and the build system facade."""
