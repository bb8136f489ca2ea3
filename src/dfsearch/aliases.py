BUFFER_HELP_TEXT = (
    "Small-file threshold and read buffer size. Buckets of files up to this\n"
    "size are hashed whole in one read; larger ones are sampled first.\n"
    "Default: 4M\n"
)

SAMPLE_HELP_TEXT = (
    "Bytes read from the {end} of large files for the sample hash.\n"
    "Head and tail together must fit into --buffer-size. Default: 64K\n"
)

CHUNK_HELP_TEXT = (
    "Chunk size for streaming full-content hashes of large files.\n"
    "Default: 32K\n"
)

EPILOG_TEXT = """
Examples:
  Basic usage - report duplicates under the current directory
  %(prog)s

  Report duplicates in Downloads, skipping a cache directory
  %(prog)s -i ~/Downloads -e ~/Downloads/.cache

  Hash large buckets on 4 threads and byte-compare every confirmed group
  %(prog)s -i /mnt/photos -j 4 --verify

  Only the groups and the total, for scripts
  %(prog)s -i /srv/data --quiet > duplicates.txt

  dfsearch never modifies, moves or deletes files.
"""
