"""Main CLI application using Cyclopts.

Descriptor commands (validate, render) work offline; ``server start`` runs
the REST API.
"""

import cyclopts

from kdeploy.cli.commands import descriptor, server, token

app = cyclopts.App(
    name="kdeploy",
    help="Declarative multi-container deployments on Kubernetes",
)

app.command(descriptor.validate, name="validate")
app.command(descriptor.render, name="render")
app.command(server.app, name="server")
app.command(token.app, name="token")
