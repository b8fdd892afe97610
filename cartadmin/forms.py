from django import forms

from .errors import ValidationError
from .models import Category, OrderStatus


def validated(form):
    """
    Return the form's cleaned data, or raise ValidationError carrying
    Django's error dict so nothing invalid reaches the gateway.
    """
    if not form.is_valid():
        errors = {field: list(msgs) for field, msgs in form.errors.items()}
        first = next(iter(errors.items()))
        raise ValidationError(f"{first[0]}: {first[1][0]}", errors)
    return form.cleaned_data


class ProductForm(forms.Form):
    """
    Form used to add a product to the live catalog.
    """
    name = forms.CharField(max_length=255)
    category = forms.ChoiceField(
        choices=[(c.value, c.value.title()) for c in Category],
        initial=Category.MICROCONTROLLERS.value,
    )
    price = forms.FloatField(min_value=0)
    stock = forms.IntegerField(min_value=0)

    # Manual image link; used when no file is uploaded or the upload fails
    image = forms.CharField(max_length=2048, required=False)

    desc = forms.CharField(widget=forms.Textarea, max_length=1000)

    # Shown as "-20% OFF" by the storefront; free text
    discount = forms.CharField(max_length=16, required=False)

    def clean_name(self):
        name = self.cleaned_data["name"].strip()
        if not name:
            raise forms.ValidationError("Product name cannot be empty.")
        return name

    def clean_image(self):
        return self.cleaned_data.get("image", "").strip()


class OrderStatusForm(forms.Form):
    """
    Form used when processing an order from its manifest.
    """
    status = forms.ChoiceField(choices=[(s.value, s.value.title()) for s in OrderStatus])

    # Blank cleans to None, never to an empty string
    delivery_date = forms.DateField(required=False)
