"""
Gringotts keeps GPG encrypted passwords in a directory.

Each entry is a single encrypted file named after the entry. Slashes in a name
create categories, which are plain directories. The gpg command is used to
perform all encryption, decryption and password generation.

\b
    * 'example' is stored in '$GRINGOTTS_DIR/example.gpg'.
    * 'web/example' is stored in '$GRINGOTTS_DIR/web/example.gpg'.

Encrypt entries for a key instead of with a passphrase:

\b
    $ export GRINGOTTS_KEYID="gringotts@example.invalid"

Add a new entry, generating a password or typing one in:

\b
    $ gringotts add web/example

Print or copy an entry:

\b
    $ gringotts show web/example
    $ gringotts copy web/example

List and delete entries:

\b
    $ gringotts list
    $ gringotts delete web/example

Commands can be shortened to any unique prefix ('a', 'c', 'd', 'l', 's').
"""

__version__ = '1.0.0'
