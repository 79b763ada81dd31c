#!/usr/bin/env python3
"""
SparkDeck command line: manage the local decks/folders and run a cloud sync.

Examples:
    sparkdeck add-folder Biology
    sparkdeck add-deck Cells --folder f_lx2k9a_3kd92m
    sparkdeck add-card d_lx2kaa_p01xz2 "What is ATP?" "Energy currency"
    SPARKDECK_ID_TOKEN=... sparkdeck sync
"""

import os
import shlex
import subprocess

import click

from config import API_BASE_URL, CACHE_DIR, CACHE_ORIGIN
from sync.client import SyncClient
from sync.coordinator import SyncCoordinator
from utils.app_context import AppContext
from utils.constants import SyncState
from utils.local_cache import LocalCache


def env_token_provider(var_name='SPARKDECK_ID_TOKEN'):
    """Read the token from the environment each time it is asked for."""
    return lambda: os.getenv(var_name)


def command_token_provider(command):
    """Run ``command`` on every request and use its stdout as the token."""
    def provide():
        result = subprocess.run(shlex.split(command), capture_output=True, text=True, check=True)
        return result.stdout.strip()
    return provide


@click.group()
@click.option('--cache-dir', default=CACHE_DIR, envvar='SPARKDECK_CACHE_DIR', show_default=True,
              help='Directory holding the local cache')
@click.option('--origin', default=CACHE_ORIGIN, envvar='SPARKDECK_ORIGIN', show_default=True,
              help='Cache namespace (one per origin)')
@click.pass_context
def cli(ctx, cache_dir, origin):
    """SparkDeck - flashcards with cloud sync."""
    ctx.obj = AppContext(LocalCache(cache_dir, origin)).load()


@cli.command('list')
@click.pass_obj
def list_items(app: AppContext):
    """Show folders and decks."""
    if not app.has_data():
        click.echo('No folders or decks yet.')
        return

    for folder in sorted(app.folders, key=lambda f: ' / '.join(app.folder_path(f['id'])).lower()):
        click.echo(f"[{folder['id']}] {' / '.join(app.folder_path(folder['id']))}/")
    for deck in app.decks:
        location = ' / '.join(app.folder_path(deck.get('folderId'))) or '(No folder)'
        click.echo(f"[{deck['id']}] {deck['name']} ({len(deck.get('cards') or [])} cards) in {location}")


@cli.command('add-folder')
@click.argument('name')
@click.option('--parent', default=None, help='Parent folder id')
@click.pass_obj
def add_folder(app: AppContext, name, parent):
    """Create a folder."""
    try:
        folder = app.add_folder(name, parent_folder_id=parent)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint='NAME')
    if folder is None:
        raise click.ClickException(f'Unknown parent folder: {parent}')
    click.echo(folder['id'])


@cli.command('rename-folder')
@click.argument('folder_id')
@click.argument('name')
@click.pass_obj
def rename_folder(app: AppContext, folder_id, name):
    """Rename a folder."""
    try:
        renamed = app.rename_folder(folder_id, name)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint='NAME')
    if not renamed:
        raise click.ClickException('Folder not found or name already taken.')
    click.echo('Folder renamed.')


@cli.command('delete-folder')
@click.argument('folder_id')
@click.pass_obj
def delete_folder(app: AppContext, folder_id):
    """Delete a folder; its decks and subfolders move to its parent."""
    if not app.delete_folder(folder_id):
        raise click.ClickException(f'Folder not found: {folder_id}')
    click.echo('Folder deleted.')


@cli.command('add-deck')
@click.argument('name')
@click.option('--category', default='')
@click.option('--folder', 'folder_id', default=None, help='Folder id')
@click.pass_obj
def add_deck(app: AppContext, name, category, folder_id):
    """Create an empty deck."""
    try:
        deck = app.add_deck(name, category=category, folder_id=folder_id)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint='NAME')
    if deck is None:
        raise click.ClickException(f'Unknown folder: {folder_id}')
    click.echo(deck['id'])


@cli.command('move-deck')
@click.argument('deck_id')
@click.option('--folder', 'folder_id', default=None, help='Target folder id (omit for no folder)')
@click.pass_obj
def move_deck(app: AppContext, deck_id, folder_id):
    """Move a deck into a folder, or out of all folders."""
    if not app.move_deck(deck_id, folder_id):
        raise click.ClickException('Deck or folder not found.')
    click.echo('Deck moved.')


@cli.command('add-card')
@click.argument('deck_id')
@click.argument('front')
@click.argument('back')
@click.option('--media-url', default=None)
@click.pass_obj
def add_card(app: AppContext, deck_id, front, back, media_url):
    """Append a card to a deck."""
    if app.add_card(deck_id, front, back, media_url=media_url) is None:
        raise click.ClickException(f'Deck not found: {deck_id}')
    click.echo('Card added.')


@cli.command()
@click.option('--api-url', default=API_BASE_URL, envvar='SPARKDECK_API_URL', show_default=True)
@click.option('--token-command', default=None,
              help='Command printing a fresh ID token; defaults to $SPARKDECK_ID_TOKEN')
@click.pass_obj
def sync(app: AppContext, api_url, token_command):
    """Sync with the cloud: download if it has data, otherwise upload."""
    provider = command_token_provider(token_command) if token_command else env_token_provider()
    result = SyncCoordinator(app, SyncClient(provider, base_url=api_url)).run()

    if not result.ok:
        click.echo(f'Sync failed: {result.error}. Local data is unchanged.', err=True)
        raise SystemExit(1)
    direction = 'Downloaded from' if result.direction == SyncState.DOWNLOADING else 'Uploaded to'
    click.echo(f'{direction} the cloud.')


if __name__ == '__main__':
    cli()
