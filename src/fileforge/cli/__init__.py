"""Command-line-interface to the remote file processing service.

For licensing see accompanying LICENSE file.
Copyright (C) 2025 Apple Inc. All Rights Reserved.
"""

import click

from fileforge.version import get_version

from . import config, image, pdf


@click.group()
@click.version_option(get_version(), prog_name="fileforge")
def main_cli():
    """Submit files for remote transformation and track them to completion."""
    pass


main_cli.add_command(image.compress_image_cli, "compress-image")
main_cli.add_command(image.convert_image_cli, "convert-image")
main_cli.add_command(image.resize_image_cli, "resize-image")
main_cli.add_command(image.formats_cli, "formats")
main_cli.add_command(pdf.compress_pdf_cli, "compress-pdf")
main_cli.add_command(pdf.extract_pdf_cli, "extract-pdf")
main_cli.add_command(pdf.merge_pdf_cli, "merge-pdf")
main_cli.add_command(config.config_cli, "config")
