import json
import logging

import click

from .pipeline import (
    CollaboratorError,
    JsonSchemaDraft,
    NullableHandling,
    SchemaGenerationError,
    SchemaGenerator,
    SchemaGeneratorConfig,
)
from .pipeline.config import FORM_FIELD_DATE_FORMATS
from .pipeline.type_model import TypeModelDocument


@click.command()
@click.option("--type", "-t", "type_name", required=True, type=str, help="Root type, e.g. shop.Order or Box<string>")
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--title", default=None, type=str, help="Schema title (derived from the type name by default)")
@click.option("--description", default=None, type=str)
@click.option("--draft", default=None, type=click.Choice([d.value for d in JsonSchemaDraft]))
@click.option("--nullable", is_flag=True, default=False, help="Wrap optional properties in oneOf [null, schema]")
@click.option(
    "--json-editor",
    is_flag=True,
    default=False,
    help="Start from the json-editor preset (form field extensions, date formats, optional wrapping)",
)
@click.option("--verbose", "-v", is_flag=True, default=False)
@click.argument("path", default=None, type=click.Path(exists=True, resolve_path=True))
@click.argument("output", default=None, type=click.Path(resolve_path=True))
def type_to_json_schema(type_name, config, title, description, draft, nullable, json_editor, verbose, path, output):
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    if config is not None:
        with open(config) as f:
            config = SchemaGeneratorConfig.from_dict(json.load(f))
    else:
        config = SchemaGeneratorConfig()

    # CLI flags override the config file
    if json_editor:
        config.form_field_extensions = True
        config.use_one_of_for_optional = True
        for date_type, date_format in FORM_FIELD_DATE_FORMATS.items():
            config.custom_type_to_format_mapping.setdefault(date_type, date_format)
    if nullable:
        config.nullable_handling = NullableHandling.NULLABLE
    if draft is not None:
        config.draft = JsonSchemaDraft(draft)

    try:
        model = TypeModelDocument.from_file(path)
        schema = SchemaGenerator(model, config).generate(type_name, title=title, description=description)
    except (CollaboratorError, SchemaGenerationError) as e:
        raise click.ClickException(str(e)) from e

    with open(output, "w") as f:
        json.dump(schema, f, indent=2)
        f.write("\n")
