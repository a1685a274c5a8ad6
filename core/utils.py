from common.exceptions import NotFoundError


def get_or_not_found(model, pk, queryset=None):
    qs = queryset if queryset is not None else model.objects.all()
    try:
        return qs.get(pk=pk)
    except (model.DoesNotExist, ValueError, TypeError):
        raise NotFoundError(f"{model._meta.verbose_name.capitalize()} not found with id of {pk}")
