#! /usr/bin/env python3

from dispatch.resolve import RevisionsResolver

if __name__ == "__main__":
    import dispatch.config
    resolver = dispatch.config.object_from_argparser(RevisionsResolver, description="Classify hidden parts of already fetched revisions")
    resolver.run()
