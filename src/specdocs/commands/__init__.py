"""Sub-commands of the ``specdocs`` CLI.

* :mod:`~specdocs.commands.extract` -- print the endpoint model.
* :mod:`~specdocs.commands.diff` -- compare two document versions.
* :mod:`~specdocs.commands.inspect` -- tabular views of a document.
* :mod:`~specdocs.commands.config` -- view and create configuration.

Single commands export a plain function registered on the root app;
groups export a :class:`typer.Typer` sub-application.
"""
