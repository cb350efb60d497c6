"""Listener for the basic site.

Hides work documents flagged ``hidden`` from listings and exposes the
build year to every template.
"""

from datetime import date

from prowl.api import predicates
from prowl.content.listener import Listener
from prowl.content.query import Filters


def published_work(api, filters, cache, request):
    if request.type != "work" or request.uid:
        return Filters(filters)
    return Filters([*filters, predicates.not_("my.work.hidden", True)])


def with_year(context, cache, request):
    return context.set("year", date.today().year)


listener = Listener(query=published_work, context=with_year)
