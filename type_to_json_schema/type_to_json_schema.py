import json
import logging

import click

from .errors import ReflectionError
from .loader import load_type
from .reflector import Reflector


@click.command()
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--allow-additional-properties", is_flag=True, default=False, help="Accept unknown keys on every record schema")
@click.option("--required-from-schema-tags", is_flag=True, default=False, help="Require only fields tagged jsonschema:required")
@click.option("--expanded", is_flag=True, default=False, help="Inline the root record instead of referencing a definition")
@click.option("--ignore", "ignore", multiple=True, type=str, help="module:Type to render as an open object (repeatable)")
@click.option("--indent", default=2, type=int, show_default=True)
@click.option("--verbose", "-v", is_flag=True, default=False)
@click.argument("target", type=str)
@click.argument("output", default=None, required=False, type=click.Path(resolve_path=True))
def type_to_json_schema(config, allow_additional_properties, required_from_schema_tags, expanded, ignore, indent, verbose, target, output):
    """Reflect TARGET (module:Type) into a JSON Schema written to OUTPUT or stdout."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG)

    try:
        if config is not None:
            with open(config) as f:
                reflector = Reflector.from_dict(json.load(f))
        else:
            reflector = Reflector()

        # Command line flags add to the config file
        if allow_additional_properties:
            reflector.allow_additional_properties = True
        if required_from_schema_tags:
            reflector.required_from_schema_tags = True
        if expanded:
            reflector.expanded_root = True
        reflector.ignored_types.extend(load_type(path) for path in ignore)

        schema = reflector.reflect(load_type(target))
    except ReflectionError as e:
        raise click.ClickException(str(e)) from e

    out = schema.to_json(indent=indent)
    if output is None:
        click.echo(out)
    else:
        with open(output, "w") as f:
            f.write(out + "\n")
